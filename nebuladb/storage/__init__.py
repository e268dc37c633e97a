"""Block-based document storage: blocks, collections and the storage engine."""