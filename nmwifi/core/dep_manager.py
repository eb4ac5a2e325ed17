"""Dependency manager — checks system/python packages needed by nmwifi."""

import importlib.util
import shutil
from dataclasses import dataclass

from nmwifi.core.i18n import t


@dataclass
class Dependency:
    name: str
    check_cmd: str       # command to check if installed
    install_hint: str    # how to install it
    critical: bool       # required for basic operation
    description: str


SYSTEM_DEPS = [
    Dependency("nmcli", "nmcli", "apt-get install -y network-manager", True,
               "NetworkManager command-line client"),
]

PYTHON_DEPS = [
    "textual>=0.47.0",
    "rich>=13.0",
]


def check_system_dep(dep: Dependency) -> bool:
    """Check if a system dependency is available."""
    return shutil.which(dep.check_cmd) is not None


def check_all_system_deps() -> dict[str, dict]:
    """Check all system dependencies, return status dict."""
    results = {}
    for dep in SYSTEM_DEPS:
        results[dep.name] = {
            "installed": check_system_dep(dep),
            "critical": dep.critical,
            "description": dep.description,
            "install_hint": dep.install_hint,
        }
    return results


def check_python_dep(package: str) -> bool:
    """Check if a Python package is importable."""
    pkg_name = package.split(">=")[0].split("==")[0].split(">")[0].split("<")[0]
    return importlib.util.find_spec(pkg_name.replace("-", "_")) is not None


def check_all_python_deps() -> dict[str, bool]:
    return {pkg: check_python_dep(pkg) for pkg in PYTHON_DEPS}


def get_missing_critical() -> list[str]:
    """Get list of missing critical dependencies."""
    return [dep.name for dep in SYSTEM_DEPS if dep.critical and not check_system_dep(dep)]


def print_status():
    """Print dependency status to console."""
    from rich.console import Console
    from rich.table import Table

    console = Console()

    table = Table(title=t("deps_system"))
    table.add_column(t("dep_name"), style="cyan")
    table.add_column(t("dep_status"), style="bold")
    table.add_column(t("dep_critical"), style="yellow")
    table.add_column(t("dep_description"))

    for name, info in check_all_system_deps().items():
        status = (f"[green]✓ {t('dep_installed')}[/]" if info["installed"]
                  else f"[red]✗ {t('dep_missing')}[/]")
        required = f"[red]{t('yes')}[/]" if info["critical"] else t("no")
        table.add_row(name, status, required, info["description"])

    console.print(table)
    console.print()

    table2 = Table(title=t("deps_python"))
    table2.add_column(t("dep_name"), style="cyan")
    table2.add_column(t("dep_status"), style="bold")

    for name, installed in check_all_python_deps().items():
        status = (f"[green]✓ {t('dep_installed')}[/]" if installed
                  else f"[red]✗ {t('dep_missing')}[/]")
        table2.add_row(name, status)

    console.print(table2)

    missing_critical = get_missing_critical()
    if missing_critical:
        console.print(f"\n[red][!] {t('nmcli_missing')}[/]")
        for dep in SYSTEM_DEPS:
            if dep.name in missing_critical:
                console.print(f"[yellow]    Run: sudo {dep.install_hint}[/]")
    return not missing_critical
