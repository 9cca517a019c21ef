from sds_converter.cli import main

raise SystemExit(main())
