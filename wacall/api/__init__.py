"""HTTP surface of wacall."""
