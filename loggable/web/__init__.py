from loggable.web.response import ResponseEntity

__all__ = ["ResponseEntity"]
