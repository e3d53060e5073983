"""Report renderers for text, Markdown, JSON and the terminal."""
