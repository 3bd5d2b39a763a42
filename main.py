import sys
import os
import subprocess
import signal
from pathlib import Path
import time
from logging import FileHandler
from collections import deque
from typing import List, Optional

from config import ServerConfig, load_config
from server_log.logger_singleton import getLogger

logger = getLogger()

# -----------------------------
# Paths & Constants
# -----------------------------
PID_FILE = Path("data_backs.pid")

RESTART_DELAY = 2  # seconds before auto-restart if crashed


# -----------------------------
# Setup Logger
# -----------------------------
LOG_FILE = Path("data_backs.log")
for handler in logger.logger.handlers:
    if isinstance(handler, FileHandler):
        LOG_FILE = Path(handler.baseFilename)
        break


# -----------------------------
# Helper Functions
# -----------------------------
def build_uvicorn_cmd(config: ServerConfig) -> List[str]:
    """uvicorn command to start the FastAPI server."""
    return [
        sys.executable, "-m", "uvicorn",
        "data_server:app",
        "--host", config.host,
        "--port", config.port,
        "--log-level", "info",
    ]


def read_pid(pid_file: Path = PID_FILE) -> Optional[int]:
    try:
        return int(pid_file.read_text())
    except (OSError, ValueError):
        return None


def is_server_running(pid_file: Path = PID_FILE) -> bool:
    if not pid_file.exists():
        return False
    pid = read_pid(pid_file)
    if pid is None:
        pid_file.unlink(missing_ok=True)
        return False
    try:
        os.kill(pid, 0)  # check if process exists
        return True
    except ProcessLookupError:
        pid_file.unlink(missing_ok=True)
        return False
    except PermissionError:
        # exists, owned by someone else
        return True


def _spawn(config: ServerConfig, pid_file: Path) -> subprocess.Popen:
    with LOG_FILE.open("a") as log_file:
        process = subprocess.Popen(
            build_uvicorn_cmd(config),
            stdout=log_file,
            stderr=log_file,
        )
    pid_file.write_text(str(process.pid))
    return process


def start_server(config: Optional[ServerConfig] = None, pid_file: Path = PID_FILE):
    if is_server_running(pid_file):
        print("Server is already running.")
        return

    pid_file.unlink(missing_ok=True)
    process = _spawn(config or load_config(), pid_file)
    print(f"Server started with PID {process.pid}, logging to {LOG_FILE}")


def stop_server(pid_file: Path = PID_FILE):
    pid = read_pid(pid_file)
    if pid is None:
        print("No PID file found. Server may not be running.")
        pid_file.unlink(missing_ok=True)
        return

    try:
        os.kill(pid, signal.SIGTERM)
        print(f"Sent SIGTERM to server PID {pid}")
        # wait for process to terminate
        for _ in range(10):
            time.sleep(0.5)
            os.kill(pid, 0)
    except ProcessLookupError:
        print(f"No process with PID {pid} found.")
    pid_file.unlink(missing_ok=True)
    print("Server stopped.")


def check_server(pid_file: Path = PID_FILE):
    if is_server_running(pid_file):
        print(f"Server is running with PID {read_pid(pid_file)}")
    else:
        print("Server is not running.")


def monitor_loop(config: Optional[ServerConfig] = None, pid_file: Path = PID_FILE):
    """Continuously monitor the server and restart if it crashes."""
    config = config or load_config()
    while True:
        if is_server_running(pid_file):
            logger.debug("Server already running. Monitor sleeping...")
            time.sleep(RESTART_DELAY)
            continue

        logger.logMessage(f"Starting server at {time.strftime('%Y-%m-%d %H:%M:%S')}")
        pid_file.unlink(missing_ok=True)
        _spawn(config, pid_file).wait()  # Wait until server exits

        logger.warning(f"Server exited, restarting in {RESTART_DELAY}s...")
        time.sleep(RESTART_DELAY)


def serve(config: Optional[ServerConfig] = None):
    """Run uvicorn in the foreground (containers, PORT from the environment)."""
    import uvicorn

    config = config or load_config()
    uvicorn.run("data_server:app", host=config.host, port=int(config.port), log_level="info")


# -----------------------------
# Utility: Tail log
# -----------------------------
def tail_log(file_path: Path, n: int = 10):
    if not file_path.exists():
        print(f"Log file not found: {file_path}")
        return

    with file_path.open("r", encoding="utf-8", errors="replace") as f:
        last_lines = deque(f, maxlen=n)

    for line in last_lines:
        print(line, end='')


# -----------------------------
# Main Menu
# -----------------------------
def main(argv: Optional[List[str]] = None):
    argv = sys.argv[1:] if argv is None else argv
    if argv and argv[0] == "serve":
        serve()
        return

    while True:
        print("\nData Backs Server Manager")
        print("1) Start Server")
        print("2) Stop Server")
        print("3) Check Server Status")
        print("4) Run Auto-Restart Monitor (blocks terminal)")
        print("5) Tail last 10 server log lines")
        print("6) Exit")
        choice = input("Select an option: ").strip()

        if choice == "1":
            start_server()
        elif choice == "2":
            stop_server()
        elif choice == "3":
            check_server()
        elif choice == "4":
            print("Entering monitor loop. Press Ctrl+C to exit.")
            try:
                monitor_loop()
            except KeyboardInterrupt:
                print("Monitor loop exited.")
        elif choice == "5":
            tail_log(LOG_FILE)
        elif choice == "6":
            break
        else:
            print("Invalid choice, try again.")

if __name__ == "__main__":
    main()
