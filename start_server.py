#!/usr/bin/env python3
"""Start the local backend that the desktop front-end talks to."""

import os
import sys
import subprocess

# Desktop shell normally runs the backend on a fixed local port
port = os.environ.get("HEATER_PORT", "8765")
host = os.environ.get("HEATER_HOST", "127.0.0.1")

try:
    port_int = int(port)
except ValueError:
    print(f"Warning: Invalid HEATER_PORT value '{port}', using default 8765", file=sys.stderr)
    port_int = 8765

cwd = os.getcwd()
src_path = os.path.join(cwd, "src")
if not os.path.isdir(src_path):
    print(f"Warning: src directory not found at {src_path}", file=sys.stderr)
    src_path = cwd

pythonpath = os.environ.get("PYTHONPATH", "")
os.environ["PYTHONPATH"] = f"{src_path}{os.pathsep}{pythonpath}" if pythonpath else src_path
sys.path.insert(0, src_path)

cmd = [
    sys.executable,
    "-m",
    "uvicorn",
    "heater_reminder.main:app",
    "--host",
    host,
    "--port",
    str(port_int),
]

print(f"Starting server on {host}:{port_int}...", file=sys.stderr)
print(f"PYTHONPATH={os.environ['PYTHONPATH']}", file=sys.stderr)

# Check if app module can be imported before starting
try:
    import heater_reminder.main  # noqa: F401
    print("✅ Successfully imported heater_reminder.main", file=sys.stderr)
except ImportError as e:
    print(f"❌ Failed to import heater_reminder.main (ImportError): {e}", file=sys.stderr)
    import traceback
    traceback.print_exc(file=sys.stderr)
    sys.exit(1)

try:
    result = subprocess.call(cmd)
    if result != 0:
        print(f"❌ Uvicorn exited with code {result}", file=sys.stderr)
    sys.exit(result)
except KeyboardInterrupt:
    print("⚠️ Server interrupted by user", file=sys.stderr)
    sys.exit(0)
