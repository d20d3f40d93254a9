"""Event rule decompilation: XML event trees to readable pseudocode."""
