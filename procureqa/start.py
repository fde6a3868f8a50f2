#!/usr/bin/env python3
"""
ProcureQA - start the admin backend
Run: python start.py [--port 5000] [--no-reload]
"""

import argparse
import os
import socket
import subprocess
import sys
from pathlib import Path


class Colors:
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    CYAN = '\033[96m'
    WHITE = '\033[97m'
    RESET = '\033[0m'


def print_colored(message, color=Colors.WHITE):
    print(f"{color}{message}{Colors.RESET}")


def port_in_use(port):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        return sock.connect_ex(('127.0.0.1', port)) == 0


def build_command(port, reload=True):
    """uvicorn command line for app.main:app"""
    cmd = [
        sys.executable,
        "-m", "uvicorn",
        "app.main:app",
        "--host", "0.0.0.0",
        "--port", str(port),
    ]
    if reload:
        cmd.append("--reload")
    return cmd


def main(argv=None):
    parser = argparse.ArgumentParser(description="Start the ProcureQA backend")
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "5000")))
    parser.add_argument("--no-reload", action="store_true")
    args = parser.parse_args(argv)

    project_root = Path(__file__).parent
    backend_dir = project_root / "backend"

    if not (project_root / ".env").exists() and not (backend_dir / ".env").exists():
        print_colored("⚠️  No .env file found, using defaults (local SQLite)", Colors.YELLOW)

    if port_in_use(args.port):
        print_colored(f"❌ Port {args.port} is in use. Pick another with --port.", Colors.RED)
        return 1

    env = os.environ.copy()
    env["PYTHONPATH"] = str(backend_dir)

    print_colored("🚀 Starting ProcureQA backend", Colors.GREEN)
    print_colored(f"   API:          http://localhost:{args.port}", Colors.WHITE)
    print_colored(f"   Health Check: http://localhost:{args.port}/health", Colors.WHITE)
    print_colored("💡 Press Ctrl+C to stop", Colors.YELLOW)

    proc = subprocess.Popen(build_command(args.port, reload=not args.no_reload), cwd=str(backend_dir), env=env)
    try:
        return proc.wait()
    except KeyboardInterrupt:
        print_colored("🛑 Stopping server...", Colors.YELLOW)
        proc.terminate()
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()
        print_colored("✅ Server stopped", Colors.GREEN)
        return 0


if __name__ == "__main__":
    sys.exit(main())
