"""
barberslots - appointment slot and availability engine for a barbershop.
"""

__version__ = "0.3.0"
