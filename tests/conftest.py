import os

# No display on build machines
os.environ.setdefault("MPLBACKEND", "Agg")
