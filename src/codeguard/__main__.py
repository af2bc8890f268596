from codeguard.runner import main

raise SystemExit(main())
