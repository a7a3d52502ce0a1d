from connroute.main import main

raise SystemExit(main())
