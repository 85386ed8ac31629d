from stepclock.cli import main

raise SystemExit(main())
