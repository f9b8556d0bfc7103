"""Two-dimensional vorticity, streamfunction and velocity fields on a uniform grid."""
