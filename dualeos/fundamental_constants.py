""" Constants that are generally used by the program
"""

# physical constants

kb = 1.380649e-23  # Boltzmann constant J/K
h = 6.62607015e-34  # Planck's constant J*S
Nav = 6.02214076e23  # Avogadro's number
R = kb * Nav  # Gas constant J/ ( mol*K)
Atometer = 1.0e-10  # conversion of angstroms to meters

standard_temperature = 298.15
standard_pressure = 101325.0
