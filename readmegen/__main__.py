from readmegen.cli import main

raise SystemExit(main())
