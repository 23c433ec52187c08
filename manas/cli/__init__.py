"""Developer CLI (`manas` console script)."""
