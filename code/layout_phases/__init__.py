from .main_path import run_main_path_phase
from .branches import run_branch_phase
from .deck_rows import run_deck_rows_phase
from .secondary_links import run_secondary_links_phase

__all__ = [
    "run_main_path_phase",
    "run_branch_phase",
    "run_deck_rows_phase",
    "run_secondary_links_phase",
]
