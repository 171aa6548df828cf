"""Shared fixtures: a grub-mkconfig style menu and a /etc/default/grub."""

import textwrap

import pytest

from grub_mate.BackupMgr import BackupMgr
from grub_mate.Grub2 import Grub2


UBUNTU_GRUB_CFG = textwrap.dedent("""\
    #
    # DO NOT EDIT THIS FILE
    #
    ### BEGIN /etc/grub.d/00_header ###
    if [ -s $prefix/grubenv ]; then
      load_env
    fi
    set default="0"
    function savedefault {
      if [ -z "${boot_once}" ]; then
        saved_entry="${chosen}"
        save_env saved_entry
      fi
    }
    ### END /etc/grub.d/00_header ###

    ### BEGIN /etc/grub.d/10_linux ###
    menuentry 'Ubuntu' --class ubuntu --class gnu-linux --class gnu --class os $menuentry_id_option 'gnulinux-simple-3f1c' {
    	recordfail
    	load_video
    	insmod gzio
    	linux	/boot/vmlinuz-6.8.0-45-generic root=UUID=3f1c ro quiet splash
    	initrd	/boot/initrd.img-6.8.0-45-generic
    }
    submenu 'Advanced options for Ubuntu' $menuentry_id_option 'gnulinux-advanced-3f1c' {
    	menuentry 'Ubuntu, with Linux 6.8.0-45-generic' --class ubuntu $menuentry_id_option 'gnulinux-6.8.0-45-generic-advanced-3f1c' {
    		recordfail
    		linux	/boot/vmlinuz-6.8.0-45-generic root=UUID=3f1c ro quiet splash
    	}
    	menuentry 'Ubuntu, with Linux 6.8.0-45-generic (recovery mode)' --class ubuntu $menuentry_id_option 'gnulinux-6.8.0-45-generic-recovery-3f1c' {
    		recordfail
    		linux	/boot/vmlinuz-6.8.0-45-generic root=UUID=3f1c ro recovery nomodeset
    	}
    }
    ### END /etc/grub.d/10_linux ###

    ### BEGIN /etc/grub.d/20_memtest86+ ###
    menuentry "Memory test (memtest86+x64.efi)" --class memtest $menuentry_id_option 'memtest86+' {
    	insmod part_gpt
    	linux	/boot/memtest86+x64.efi
    }
    ### END /etc/grub.d/20_memtest86+ ###
    ### BEGIN /etc/grub.d/30_uefi-firmware ###
    menuentry 'UEFI Firmware Settings' $menuentry_id_option 'uefi-firmware' {
    	fwsetup
    }
    ### END /etc/grub.d/30_uefi-firmware ###
""")

DEFAULT_GRUB = textwrap.dedent("""\
    # If you change this file, run 'update-grub' afterwards to update
    # /boot/grub/grub.cfg.

    GRUB_DEFAULT=0
    GRUB_TIMEOUT_STYLE=hidden
    GRUB_TIMEOUT=5
    GRUB_DISTRIBUTOR=`lsb_release -i -s 2> /dev/null || echo Debian`
    GRUB_CMDLINE_LINUX_DEFAULT="quiet splash"
    GRUB_CMDLINE_LINUX=""
    #GRUB_GFXMODE=640x480
""")


@pytest.fixture
def grub_files(tmp_path):
    """A grub.cfg and a /etc/default/grub in a temp dir."""
    grub_cfg = tmp_path / "grub.cfg"
    grub_cfg.write_text(UBUNTU_GRUB_CFG)
    etc_grub = tmp_path / "grub"
    etc_grub.write_text(DEFAULT_GRUB)
    return grub_cfg, etc_grub


@pytest.fixture
def grub(tmp_path, grub_files):
    """A loaded Grub2 model over the temp files; backups go to tmp_path."""
    grub_cfg, etc_grub = grub_files
    model = Grub2(grub_cfg=str(grub_cfg), etc_grub=str(etc_grub),
                  update_grub="/bin/true",
                  backup_mgr=BackupMgr(target_path=etc_grub, backup_dir=tmp_path / "backups"))
    model.load()
    yield model
    model.grub_writer.shutdown()
