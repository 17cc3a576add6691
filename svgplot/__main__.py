from svgplot.cli import main

raise SystemExit(main())
