from .api_models import RequestOptions, RpcTask, merge_request_options

__all__ = ["RequestOptions", "RpcTask", "merge_request_options"]
