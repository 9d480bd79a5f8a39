"""Info command - Show environment and modeling settings."""

import sys

from perfmodel.core import ModelingSettings


def info_command() -> None:
    """Show dependency versions and active modeling settings."""
    print("[llm-perfmodel] System Information")
    print("─" * 40)

    print(f"  Python: {sys.version.split()[0]}")

    from perfmodel import __version__
    print(f"  llm-perfmodel: {__version__}")

    import numpy
    print(f"  numpy: {numpy.__version__}")

    import pydantic
    print(f"  pydantic: {pydantic.__version__}")

    print("─" * 40)
    print("[llm-perfmodel] Modeling Settings")
    for name, value in ModelingSettings.from_env().model_dump().items():
        print(f"  {name}: {value}")
    print("─" * 40)
