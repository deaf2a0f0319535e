from a11yscan.cli import main

raise SystemExit(main())
