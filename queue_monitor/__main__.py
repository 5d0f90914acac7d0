from queue_monitor.cli import main

raise SystemExit(main())
