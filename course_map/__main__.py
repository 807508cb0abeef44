"""Allow ``python -m course_map``."""

from course_map.cli import main

raise SystemExit(main())
