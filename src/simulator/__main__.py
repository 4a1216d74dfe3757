from .run_simulator import main

raise SystemExit(main())
