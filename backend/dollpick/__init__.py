"""DollPick — crane-game arcade directory API."""
