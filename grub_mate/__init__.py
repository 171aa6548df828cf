"""grub-mate: a model of GRUB2's menu entries and /etc/default/grub settings."""

__version__ = '0.1.0'
