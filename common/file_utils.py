# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions: atomic symlink replacement, merging
directory trees and writing generated files.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

from common.command_utils import get_symbols, log_installer
from installer.config_models import InstallSettings

module_logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def atomic_symlink(
    target: PathLike,
    link_path: PathLike,
    install_settings: Optional[InstallSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Point link_path at target, replacing any existing link in one rename.

    Equivalent to ``ln -nsf target link_path`` except that readers never
    observe a missing link: the new link is created beside the old one and
    renamed over it. An existing symlink to a directory is replaced, not
    descended into.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)
    link = Path(link_path)
    link.parent.mkdir(parents=True, exist_ok=True)
    tmp_link = link.parent / f".{link.name}.tmp-{os.getpid()}"
    if tmp_link.is_symlink() or tmp_link.exists():
        tmp_link.unlink()
    os.symlink(str(target), str(tmp_link))
    os.replace(str(tmp_link), str(link))
    log_installer(
        f"{symbols.get('info', 'ℹ️')} Linked {link} -> {target}",
        "info",
        logger_to_use,
        install_settings,
    )


def merge_copy_tree(
    source_dir: PathLike,
    dest_dir: PathLike,
    install_settings: Optional[InstallSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Copy the contents of source_dir into dest_dir (``cp -rT``).

    Existing files in dest_dir are overwritten; files only present in
    dest_dir are kept.
    """
    logger_to_use = current_logger if current_logger else module_logger
    log_installer(
        f"Copying {source_dir} into {dest_dir}",
        "info",
        logger_to_use,
        install_settings,
    )
    shutil.copytree(str(source_dir), str(dest_dir), symlinks=True, dirs_exist_ok=True)


def write_text_file(
    path: PathLike,
    content: str,
    install_settings: Optional[InstallSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Write content to path, creating parent directories and replacing atomically."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(install_settings)
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = target.parent / f".{target.name}.tmp-{os.getpid()}"
    with open(tmp_path, "w", encoding="utf-8") as f:
        f.write(content)
    os.replace(str(tmp_path), str(target))
    log_installer(
        f"{symbols.get('success', '✅')} Wrote {target}",
        "success",
        logger_to_use,
        install_settings,
    )
