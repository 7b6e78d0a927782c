"""Path templates compiled into a segment trie, matched per request."""
