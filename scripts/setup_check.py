#!/usr/bin/env python3
"""
opencode-notify - Requirements Checker

Checks the external tools used for notifications and focus detection and
prints install hints for anything missing. Run standalone or through
`hook-handler.py check`.
"""

import platform
import shutil
import sys


class Colors:
    """ANSI colors for terminal output."""

    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'
    BOLD = '\033[1m'
    END = '\033[0m'


# binary -> (required, what it is used for)
TOOLS = {
    'notify-send': (True, 'desktop notifications'),
    'xdotool': (False, 'X11 focus detection'),
    'tmux': (False, 'tmux window focus'),
    'canberra-gtk-play': (False, 'notification sounds'),
}

# binary -> package name per package manager
PACKAGES = {
    'notify-send': {'apt': 'libnotify-bin', 'dnf': 'libnotify',
                    'pacman': 'libnotify'},
    'xdotool': {'apt': 'xdotool', 'dnf': 'xdotool', 'pacman': 'xdotool'},
    'tmux': {'apt': 'tmux', 'dnf': 'tmux', 'pacman': 'tmux'},
    'canberra-gtk-play': {'apt': 'gnome-session-canberra',
                          'dnf': 'libcanberra-gtk3',
                          'pacman': 'libcanberra'},
}

INSTALL_COMMANDS = {
    'apt': 'sudo apt install',
    'dnf': 'sudo dnf install',
    'pacman': 'sudo pacman -S',
}


def colored(text, color):
    """Apply color to text if terminal supports it."""
    if sys.stdout.isatty():
        return f"{color}{text}{Colors.END}"
    return text


def print_status(name, ok, detail="", optional=False):
    """Print a status line."""
    if ok:
        status = colored("✓", Colors.GREEN)
    elif optional:
        status = colored("-", Colors.YELLOW)
    else:
        status = colored("✗", Colors.RED)

    line = f"  {status} {name}"
    if detail:
        line += f" ({detail})"
    print(line)


def get_platform_info():
    """Get platform information."""
    system = platform.system().lower()
    machine = platform.machine()

    if system == 'darwin':
        return 'macos', machine
    elif system == 'linux':
        return 'linux', machine
    return 'unknown', machine


def check_python():
    """Check Python version."""
    version = sys.version_info[:3]
    version_str = f"{version[0]}.{version[1]}.{version[2]}"
    return version >= (3, 9, 0), version_str


def check_tool(binary):
    """Check if a binary is on PATH."""
    path = shutil.which(binary)
    return (True, path) if path else (False, "not found")


def detect_package_manager():
    """First package manager found on PATH, or None."""
    for manager in INSTALL_COMMANDS:
        if shutil.which(manager):
            return manager
    return None


def get_install_commands(missing, manager):
    """Install commands for missing tools with the given package manager."""
    if manager is None:
        return []
    packages = [PACKAGES[b][manager] for b in missing if b in PACKAGES]
    if not packages:
        return []
    return [f"{INSTALL_COMMANDS[manager]} {' '.join(packages)}"]


def check_all():
    """
    Run all checks.

    Returns:
        tuple: (all_required_ok, results_dict, missing_list)
    """
    results = {}
    missing = []

    plat, arch = get_platform_info()
    results['platform'] = (True, f"{plat}/{arch}")

    ok, ver = check_python()
    results['python'] = (ok, ver)
    all_ok = ok

    for binary, (required, _) in TOOLS.items():
        ok, detail = check_tool(binary)
        results[binary] = (ok, detail)
        if not ok:
            missing.append(binary)
            if required:
                all_ok = False

    return all_ok, results, missing


def print_results(results):
    """Print check results."""
    print(colored("  Requirements:", Colors.BOLD))
    print()
    print_status("Platform", True, results['platform'][1])
    print_status("Python 3.9+", *results['python'])
    for binary, (required, purpose) in TOOLS.items():
        ok, detail = results[binary]
        print_status(f"{binary} - {purpose}", ok, detail,
                     optional=not required)
    print()


def main(quiet=False):
    """
    Check requirements.

    Args:
        quiet: Don't print anything if all required tools are present

    Returns:
        bool: True if all required tools are available
    """
    all_ok, results, missing = check_all()

    if all_ok and (quiet or not missing):
        if not quiet:
            print_results(results)
            print(colored("  ✓ All requirements met.", Colors.GREEN))
            print()
        return True

    print_results(results)

    commands = get_install_commands(missing, detect_package_manager())
    if commands:
        print(colored("  Install missing tools:", Colors.CYAN))
        for cmd in commands:
            print(f"    {cmd}")
        print()

    if not all_ok:
        print(colored("  Notifications will not work until the required "
                      "tools are installed.", Colors.RED))
        print()
    return all_ok


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='opencode-notify setup check')
    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Quiet mode - only output if something is missing'
    )
    args = parser.parse_args()
    sys.exit(0 if main(quiet=args.quiet) else 1)
