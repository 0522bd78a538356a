LAMBDA_NAME = 'update_link'

# Log event codes
UPDATE_SUCCESS = 'UPDATE_SUCCESS'
UPDATE_REJECTED = 'UPDATE_REJECTED'
