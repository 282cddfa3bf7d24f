#!/usr/bin/env python3
"""
Prometheus remote read protobuf messages

Message classes for the `prometheus` package of remote.proto/types.proto,
built from a descriptor at import time. Field numbers match upstream so the
wire format is identical to what Prometheus sends and expects.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

FieldProto = descriptor_pb2.FieldDescriptorProto

PACKAGE = "prometheus"

OPTIONAL = FieldProto.LABEL_OPTIONAL
REPEATED = FieldProto.LABEL_REPEATED


def _field(name, number, ftype, label=OPTIONAL, type_name=None):
    f = FieldProto(name=name, number=number, type=ftype, label=label)
    if type_name:
        f.type_name = f".{PACKAGE}.{type_name}"
    return f


def _message(file_proto, name, fields, enums=None):
    msg = file_proto.message_type.add(name=name)
    msg.field.extend(fields)
    for enum_name, values in (enums or {}).items():
        enum = msg.enum_type.add(name=enum_name)
        for value_name, number in values:
            enum.value.add(name=value_name, number=number)
    return msg


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    fp = descriptor_pb2.FileDescriptorProto(name="prometheus/remote_read.proto", package=PACKAGE, syntax="proto3")

    _message(fp, "Sample", [
        _field("value", 1, FieldProto.TYPE_DOUBLE),
        _field("timestamp", 2, FieldProto.TYPE_INT64),
    ])
    _message(fp, "Label", [
        _field("name", 1, FieldProto.TYPE_STRING),
        _field("value", 2, FieldProto.TYPE_STRING),
    ])
    _message(fp, "LabelMatcher", [
        _field("type", 1, FieldProto.TYPE_ENUM, type_name="LabelMatcher.Type"),
        _field("name", 2, FieldProto.TYPE_STRING),
        _field("value", 3, FieldProto.TYPE_STRING),
    ], enums={"Type": [("EQ", 0), ("NEQ", 1), ("RE", 2), ("NRE", 3)]})
    _message(fp, "ReadHints", [
        _field("step_ms", 1, FieldProto.TYPE_INT64),
        _field("func", 2, FieldProto.TYPE_STRING),
        _field("start_ms", 3, FieldProto.TYPE_INT64),
        _field("end_ms", 4, FieldProto.TYPE_INT64),
        _field("grouping", 5, FieldProto.TYPE_STRING, REPEATED),
        _field("by", 6, FieldProto.TYPE_BOOL),
        _field("range_ms", 7, FieldProto.TYPE_INT64),
    ])
    _message(fp, "TimeSeries", [
        _field("labels", 1, FieldProto.TYPE_MESSAGE, REPEATED, "Label"),
        _field("samples", 2, FieldProto.TYPE_MESSAGE, REPEATED, "Sample"),
    ])
    _message(fp, "Query", [
        _field("start_timestamp_ms", 1, FieldProto.TYPE_INT64),
        _field("end_timestamp_ms", 2, FieldProto.TYPE_INT64),
        _field("matchers", 3, FieldProto.TYPE_MESSAGE, REPEATED, "LabelMatcher"),
        _field("hints", 4, FieldProto.TYPE_MESSAGE, type_name="ReadHints"),
    ])
    _message(fp, "QueryResult", [
        _field("timeseries", 1, FieldProto.TYPE_MESSAGE, REPEATED, "TimeSeries"),
    ])
    _message(fp, "ReadRequest", [
        _field("queries", 1, FieldProto.TYPE_MESSAGE, REPEATED, "Query"),
        _field("accepted_response_types", 2, FieldProto.TYPE_ENUM, REPEATED, "ReadRequest.ResponseType"),
    ], enums={"ResponseType": [("SAMPLES", 0), ("STREAMED_XOR_CHUNKS", 1)]})
    _message(fp, "ReadResponse", [
        _field("results", 1, FieldProto.TYPE_MESSAGE, REPEATED, "QueryResult"),
    ])
    return fp


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())


def _message_class(name):
    return message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.{name}"))


Sample = _message_class("Sample")
Label = _message_class("Label")
LabelMatcher = _message_class("LabelMatcher")
ReadHints = _message_class("ReadHints")
TimeSeries = _message_class("TimeSeries")
Query = _message_class("Query")
QueryResult = _message_class("QueryResult")
ReadRequest = _message_class("ReadRequest")
ReadResponse = _message_class("ReadResponse")
