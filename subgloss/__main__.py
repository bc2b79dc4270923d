"""Package entry point for ``python -m subgloss``.

WHY: Users run the annotator as ``python -m subgloss episodes/`` for CLI
mode, or ``python -m subgloss --serve`` to start the HTTP API.

HOW: Checks sys.argv for the ``--serve`` flag. If present, starts the
FastAPI app with uvicorn. Otherwise, delegates to the CLI's main().

RULES:
- ``--serve`` starts the HTTP API (host/port from SUBGLOSS_HOST/SUBGLOSS_PORT)
- Without ``--serve``, falls through to the CLI
"""

import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        from subgloss.server.app import serve
        serve()
    else:
        from subgloss.cli import main
        main()
