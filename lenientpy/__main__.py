from lenientpy.cli import main

raise SystemExit(main())
