import os

from config import home_directory
from smallsh.job_control import show_jobs


def builtin_cd(args):
    """Change directory"""
    path = args[0] if args else home_directory()
    try:
        os.chdir(path)
        return True
    except OSError as e:
        print(f"cd: {e}", flush=True)
        return False


def builtin_status(shell):
    """Show how the last foreground command ended"""
    print(shell.status.describe(), flush=True)


def builtin_exit(shell):
    """Stop the main loop. Background jobs keep running."""
    shell.running = False


def builtin_jobs(shell):
    show_jobs(shell.registry)


def execute_builtin(shell, command):
    """
    Execute built-in command if it matches.
    Redirection and & are ignored for built-ins.
    Returns: True if the command was a built-in
    """
    cmd = command.name
    args = command.argv[1:]

    builtins = {
        'status': lambda: builtin_status(shell),
        'exit': lambda: builtin_exit(shell),
        'jobs': lambda: builtin_jobs(shell),
    }

    if cmd == 'cd':
        builtin_cd(args)
        return True
    elif cmd in builtins:
        builtins[cmd]()
        return True

    return False
