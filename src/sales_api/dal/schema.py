"""
Table definitions for the hosted sales database.

The tables live in the hosted Postgres instance; these definitions describe
them to SQLAlchemy Core so queries can be built without raw SQL.
"""

from sqlalchemy import Column, Date, ForeignKey, Integer, MetaData, Numeric, Table, Text

metadata = MetaData()

master_customer = Table(
    'master_customer',
    metadata,
    Column('customerid', Integer, primary_key=True, autoincrement=True),
    Column('custname', Text, nullable=False),
)

master_item = Table(
    'master_item',
    metadata,
    Column('itemid', Integer, primary_key=True, autoincrement=True),
    Column('itemname', Text, nullable=False),
)

# customerid is a soft reference: deleting a customer must not break old sales
sales_header = Table(
    'sales_header',
    metadata,
    Column('docno', Integer, primary_key=True, autoincrement=True),
    Column('docdate', Date, nullable=False),
    Column('customerid', Integer, nullable=True, index=True),
)

# itemid is a soft reference for the same reason
sales_detail = Table(
    'sales_detail',
    metadata,
    Column('docno', Integer, ForeignKey('sales_header.docno', ondelete='CASCADE'), primary_key=True),
    Column('itemid', Integer, primary_key=True, autoincrement=False),
    Column('unitprice', Numeric(12, 2), nullable=False),
    Column('qty', Integer, nullable=False),
)
