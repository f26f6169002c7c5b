"""
echozero
========

RF propagation and electronic-warfare jamming engine for mobile entities
(transmitters, receivers, jammers, autonomous drones).

Packages:
    - core: components, configuration tables, entity store, interfaces
    - environment: path-loss models and antenna gain
    - ecm: jammer lifecycle control
    - simulation: per-tick systems, engine, factories, scenario loading
    - cli: command-line runner
"""

__version__ = "0.1.0"
__author__ = "Echo Zero Team"
