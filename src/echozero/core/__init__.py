"""Components, configuration tables, entity store and interfaces."""
