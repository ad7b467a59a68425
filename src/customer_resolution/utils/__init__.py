from customer_resolution.utils.parallel import chunked, map_in_chunks

__all__ = ["chunked", "map_in_chunks"]
