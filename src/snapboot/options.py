# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/options.py

"""Kernel command line rewriting and snapshot matching."""

import re

DROPPED_PREFIXES = ("BOOT_IMAGE=", "initrd=")


def rewrite_options(base: str, root_uuid: str, subvolume: str) -> str:
    """Rewrite a command line so that it boots ``subvolume`` of ``root_uuid``.

    ``BOOT_IMAGE=`` and ``initrd=`` are dropped, ``root=`` points at the
    filesystem UUID and exactly one ``rootflags=subvol=`` survives. The
    first ``root=``/``rootflags=`` keep their position; other tokens keep
    their order.
    """
    root = f"root=UUID={root_uuid}"
    rootflags = f"rootflags=subvol={subvolume}"

    tokens = []
    seen_root = seen_rootflags = False
    for token in base.split():
        if token.startswith(DROPPED_PREFIXES):
            continue
        if token.startswith("root="):
            if not seen_root:
                tokens.append(root)
                seen_root = True
            continue
        if token.startswith("rootflags="):
            if not seen_rootflags:
                tokens.append(_with_subvol(token, subvolume))
                seen_rootflags = True
            continue
        tokens.append(token)

    if not seen_root:
        tokens.insert(0, root)
    if not seen_rootflags:
        tokens.append(rootflags)
    return " ".join(tokens)


def _with_subvol(token: str, subvolume: str) -> str:
    # keep other mount flags, e.g. rootflags=compress=zstd,subvol=@/x
    flags = token[len("rootflags="):].split(",")
    flags = [f for f in flags if f and not f.startswith("subvol=")]
    return "rootflags=" + ",".join([f"subvol={subvolume}"] + flags)


def matches_snapshot(options: str, root_uuid: str, subvolume: str) -> bool:
    """Whether an entry's options boot ``subvolume`` on ``root_uuid``.

    This is the only place entries are tied to snapshots, by pattern
    matching on their free-text options.
    """
    root = rf"(^|\s)root=UUID={re.escape(root_uuid)}(\s|$)"
    flags = rf"(^|\s)rootflags=(\S*,)?subvol=/?{re.escape(subvolume.lstrip('/'))}(,\S*)?(\s|$)"
    return bool(re.search(root, options)) and bool(re.search(flags, options))
