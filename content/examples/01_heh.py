"""# HeH System

Compute the ground state of the HeH molecule.
"""

# ## Geometry
# The bond length is given in bohr.

bond_length = 1.46
print(bond_length)
