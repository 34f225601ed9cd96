# shiftplan/io - Input/output handling
from .csv_loader import load_roster, save_roster
from .json_loader import load_request, save_plan

__all__ = ["load_roster", "save_roster", "load_request", "save_plan"]
