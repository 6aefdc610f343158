from __future__ import annotations

__all__ = ["Q", "K_B", "K_B_EV", "EPS0", "CM3_PER_M3"]

# Fundamental constants (SI)
Q    = 1.602176634e-19       # elementary charge [C]
K_B  = 1.380649e-23          # Boltzmann constant [J/K]
EPS0 = 8.8541878128e-12      # vacuum permittivity [F/m]

K_B_EV = K_B / Q             # Boltzmann constant [eV/K]
CM3_PER_M3 = 1e-6            # 1 m^-3 expressed in cm^-3
