LAMBDA_NAME = 'resolve_link'

# Log event codes
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
REDIRECT_REJECTED = 'REDIRECT_REJECTED'
