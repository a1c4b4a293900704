"""Sample plugcli plugins."""
