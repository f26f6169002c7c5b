"""Electronic countermeasures: jammer lifecycle control."""

from echozero.ecm.jammer_control import JammerController

__all__ = ['JammerController']
