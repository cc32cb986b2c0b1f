"""Result cache: TTL + LRU, in-process."""
