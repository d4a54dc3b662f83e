import glob
import os
import platform

POWER_SUPPLY_ROOT = "/sys/class/power_supply"


def platform_version() -> str:
    return f"{platform.system()} {platform.release()}"


def _read(path):
    with open(path) as f:
        return f.read().strip()


def battery_level(root: str = POWER_SUPPLY_ROOT) -> int:
    """Charge of the first battery in percent, or -1 when there is none."""
    for supply in sorted(glob.glob(os.path.join(root, "*"))):
        try:
            if _read(os.path.join(supply, "type")) != "Battery":
                continue
            return int(_read(os.path.join(supply, "capacity")))
        except (OSError, ValueError):
            continue
    return -1
