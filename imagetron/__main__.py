from imagetron.main import main

raise SystemExit(main())
