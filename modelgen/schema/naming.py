"""Naming and description helpers."""
from typing import Tuple


def sanitize(text: str) -> str:
    """Escape quotes/backslashes and collapse whitespace in descriptions"""
    if not text:
        return ""
    text = text.replace("\\", "\\\\").replace('"', '\\"')
    text = text.replace("\n", " ").replace("\r", "").replace("\t", " ")
    return " ".join(text.split())


def humanize(name: str) -> str:
    """snake_case -> "snake case" """
    return name.replace("_", " ").strip()


def to_title(name: str) -> str:
    """snake_case -> SnakeCase"""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_"))


def split_resource_name(name: str) -> Tuple[str, str]:
    """
    Split a resource name into (service, clean name)

    Example:
        "openstack_instance" -> ("openstack", "instance")
        "project" -> ("core", "project")
    """
    service, sep, clean_name = name.partition("_")
    if not sep or not clean_name:
        return "core", name
    return service, clean_name


def default_description(name: str, resource_name: str, current: str = "") -> str:
    """Return `current` when meaningful, otherwise a description derived from the field name"""
    if len(current.strip()) >= 2:
        return sanitize(current)

    if name.endswith("_uuid"):
        desc = f"UUID of the {humanize(name[:-5])}"
    elif name.endswith("_name"):
        desc = f"Name of the {humanize(name[:-5])}"
    elif name.endswith("_id"):
        desc = f"ID of the {humanize(name[:-3])}"
    elif name == "name":
        desc = f"Name of the {resource_name}"
    elif name == "description":
        desc = f"Description of the {resource_name}"
    elif name == "uuid":
        desc = f"UUID of the {resource_name}"
    elif name.startswith("is_"):
        desc = f"Is {humanize(name[3:])}"
    else:
        human = humanize(name)
        desc = human[:1].upper() + human[1:] if human else " "

    return sanitize(desc)
