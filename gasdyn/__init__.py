"""Perfect-gas thermodynamics and one-dimensional compressible flow."""
