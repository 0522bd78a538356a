LAMBDA_NAME = 'delete_link'

# Log event codes
DELETE_SUCCESS = 'DELETE_SUCCESS'
DELETE_REJECTED = 'DELETE_REJECTED'
