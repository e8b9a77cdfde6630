from .ingest import main

raise SystemExit(main())
