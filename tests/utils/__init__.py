# tests/utils/__init__.py

from .config_validate import make_summary
from .constants import DEFAULT_TEST_LOG_LEVEL, PROJ_ROOT
from .patch_everywhere import patch_everywhere
from .project import (
    EngineCall,
    FakeBuildSystem,
    FakeCoverageTool,
    FakeEngine,
    make_options,
    make_project,
    write_erl,
)


__all__ = [  # noqa: RUF022
    # config_validate
    "make_summary",
    # constants
    "DEFAULT_TEST_LOG_LEVEL",
    "PROJ_ROOT",
    # patch_everywhere
    "patch_everywhere",
    # project
    "EngineCall",
    "FakeBuildSystem",
    "FakeCoverageTool",
    "FakeEngine",
    "make_options",
    "make_project",
    "write_erl",
]
