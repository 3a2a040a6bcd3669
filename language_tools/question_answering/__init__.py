"""Knowledge-base question answering client."""
