"""System functions wrapped by the phase classes in :mod:`capsim.phases`."""
