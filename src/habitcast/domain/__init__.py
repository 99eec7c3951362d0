"""Pure domain helpers: design templates, anchors, intentions, statements."""
