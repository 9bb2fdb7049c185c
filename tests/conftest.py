import os

# Allow the Qt tests to run on headless machines (no display server).
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
