"""vmscan — inventory of VMware Workstation virtual machines on a host."""

__version__ = "0.1.0"
