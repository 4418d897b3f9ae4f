"""Static catalogs — package manager probes, install commands, shell profiles."""
